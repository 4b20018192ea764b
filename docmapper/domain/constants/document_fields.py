"""Constants for base Document field names"""


class DocumentFields:
    """Field name constants shared by every stored document"""
    ID = "_id"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    DELETED_AT = "deleted_at"
    IS_DELETED = "is_deleted"

    # Python attribute that maps onto MongoDB's _id
    ID_ATTRIBUTE = "id"
