class AppConstants:
    DEFAULT_QUERY = 'SELECT Id FROM Account LIMIT 10'
    DEFAULT_FIELD = 'Id'
    DEFAULT_LIMIT = 10
    DEFAULT_OFFSET = 0
    MAX_LIMIT = 50000
    HIGH_LIMIT_THRESHOLD = 10000
    MANY_FIELDS_THRESHOLD = 10

    # condition attributes
    FIELD = 'field'
    OPERATOR = 'operator'
    VALUE = 'value'
    CONNECTOR = 'connector'

    # connectors / sort
    AND = 'AND'
    OR = 'OR'
    ASC = 'ASC'
    DESC = 'DESC'

    # literal tokens
    TRUE = 'true'
    FALSE = 'false'
    NULL = 'null'

    # grades
    GOOD = 'Good'
    FAIR = 'Fair'
    POOR = 'Poor'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'

    GRADE_SCORES = {GOOD: 85, FAIR: 65, POOR: 40}
    GRADE_VARIANTS = {GOOD: SUCCESS, FAIR: WARNING, POOR: ERROR}
    FALLBACK_SCORE = 75

    # always indexed on every standard object
    INDEXED_FIELDS = ['Id', 'Name', 'OwnerId', 'CreatedDate', 'LastModifiedDate', 'SystemModStamp']
    NEGATIVE_OPERATORS = ['!=', 'NOT IN', 'NOT LIKE']

    # salesforce REST payload keys
    RECORDS = 'records'
    TOTAL_SIZE = 'totalSize'
    ATTRIBUTES = 'attributes'
    FIELDS = 'fields'
    NAME = 'name'
    LABEL = 'label'
    TYPE = 'type'
    PICKLIST_VALUES = 'picklistValues'
    ACTIVE = 'active'
    EXTERNAL_ID = 'externalId'
    UNIQUE = 'unique'
    MESSAGE = 'message'
    ERROR_CODE = 'errorCode'
    QUERY = 'query'

    # analyzer payload keys
    PERFORMANCE_SCORE = 'performanceScore'
    PERFORMANCE_GRADE = 'performanceGrade'
    GRADE_VARIANT = 'gradeVariant'
    SUGGESTIONS = 'suggestions'
    EXPLANATION = 'explanation'
    ESTIMATED_RECORDS = 'estimatedRecords'
