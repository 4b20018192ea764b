"""
MongoDB Operator Tokens
=======================

Reserved operator names used when building filter, update and
aggregation documents. These are sent to the server verbatim and must
match MongoDB's wire vocabulary exactly.
"""


class Operator:
    """Operator token constants for queries, updates and pipelines"""

    # Aggregation stages
    ADD_FIELDS = "$addFields"
    BUCKET = "$bucket"
    BUCKET_AUTO = "$bucketAuto"
    COLL_STATS = "$collStats"
    COUNT = "$count"
    FACET = "$facet"
    GEO_NEAR = "$geoNear"
    GRAPH_LOOKUP = "$graphLookup"
    GROUP = "$group"
    INDEX_STATS = "$indexStats"
    LIMIT = "$limit"
    LIST_SESSIONS = "$listSessions"
    LOOKUP = "$lookup"
    MATCH = "$match"
    MERGE = "$merge"
    OUT = "$out"
    PLAN_CACHE_STATS = "$planCacheStats"
    PROJECT = "$project"
    REDACT = "$redact"
    REPLACE_ROOT = "$replaceRoot"
    REPLACE_WITH = "$replaceWith"
    SAMPLE = "$sample"
    SET = "$set"
    SKIP = "$skip"
    SORT = "$sort"
    SORT_BY_COUNT = "$sortByCount"
    UNSET = "$unset"
    MUL = "$mul"
    UNWIND = "$unwind"

    # Accumulators
    AVG = "$avg"
    MAX = "$max"
    MIN = "$min"
    STD_DEV_POP = "$stdDevPop"
    STD_DEV_SAMP = "$stdDevSamp"
    SUM = "$sum"

    # Array updates
    ADD_TO_SET = "$addToSet"
    POP = "$pop"
    PULL = "$pull"
    PUSH = "$push"
    PULL_ALL = "$pullAll"

    # Comparison
    EQ = "$eq"
    GT = "$gt"
    GTE = "$gte"
    IN = "$in"
    LT = "$lt"
    LTE = "$lte"
    NE = "$ne"
    NIN = "$nin"

    # Logical
    AND = "$and"
    NOT = "$not"
    NOR = "$nor"
    OR = "$or"

    # Element
    EXISTS = "$exists"
    TYPE = "$type"

    # Evaluation
    EXPR = "$expr"
    JSON_SCHEMA = "$jsonSchema"
    MOD = "$mod"
    REGEX = "$regex"
    TEXT = "$text"
    WHERE = "$where"

    # Geospatial
    GEO_INTERSECTS = "$geoIntersects"
    GEO_WITHIN = "$geoWithin"
    NEAR = "$near"
    NEAR_SPHERE = "$nearSphere"

    # Array queries
    ALL = "$all"
    ELEM_MATCH = "$elemMatch"
    SIZE = "$size"

    # Bitwise
    BITS_ALL_CLEAR = "$bitsAllClear"
    BITS_ALL_SET = "$bitsAllSet"
    BITS_ANY_CLEAR = "$bitsAnyClear"
    BITS_ANY_SET = "$bitsAnySet"

    # Comments
    COMMENT = "$comment"

    # Projection
    DOLLAR = "$"
    META = "$meta"
    SLICE = "$slice"

    # $lookup stage keys
    LOOKUP_FROM = "from"
    LOOKUP_LOCAL_FIELD = "localField"
    LOOKUP_FOREIGN_FIELD = "foreignField"
    LOOKUP_AS = "as"
    LOOKUP_LET = "let"
    LOOKUP_PIPELINE = "pipeline"
