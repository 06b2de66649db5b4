class AppMessage:
    LIMIT_EXCEEDED = 'LIMIT cannot exceed 50,000 records'
    INVALID_QUERY = 'Please build a valid query first'
    QUERY_BUSY = 'A query is already running, wait for it to finish'
    METADATA_FAILED = 'Failed to fetch object metadata'
    QUERY_FAILED = 'Query execution failed'
    ANALYSIS_UNAVAILABLE = 'Query analysis temporarily unavailable'

    # optimization tips
    TIP_INDEXED_FIELDS = 'Use indexed fields in WHERE clause for better performance'
    TIP_NARROW_FIELDS = 'Consider selecting only the fields you need'
    TIP_ADD_LIMIT = 'Use LIMIT to prevent hitting governor limits'
    TIP_NEGATIVE_OPERATORS = 'Negative operators can impact performance'

    BEST_PRACTICES = [
        'Use indexed fields in WHERE clauses for better performance',
        'Limit the number of fields returned to only what you need',
        'Use LIMIT clause to prevent hitting governor limits',
        'Avoid SOQL queries inside loops',
        'Use selective filters to reduce result set size',
    ]
