"""Constants for User document field names"""


class UserFields:
    """Field name constants for stored user documents"""
    NAME = "name"
    EMAIL = "email"
    DEPARTMENT = "department"
    ROLE = "role"
    ACTIVE = "active"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field

    # Fields a search may sort on
    SORTABLE = (NAME, EMAIL, DEPARTMENT, ROLE, ACTIVE, CREATED_AT, UPDATED_AT)


class DepartmentStatsFields:
    """Output field names of the department statistics pipeline"""
    DEPARTMENT = "_id"
    TOTAL_USERS = "totalUsers"
    ACTIVE_USERS = "activeUsers"
