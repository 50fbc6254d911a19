"""Warehouse error classification tables.

Immutable lookup tables the retry decision consults. They are defined once
at import time and never mutated.
"""

# HTTP status codes that always warrant another attempt
RETRYABLE_STATUS_CODES = frozenset({429, 500, 503, 401})

# Status code a caller-side timeout is classified as
TIMEOUT_STATUS_CODE = 503

# IAM policy of a freshly created dataset/service account not yet visible
RETRY_SERVICE_ACCOUNT_NOT_EXIST = "IAM setPolicy failed for Dataset"

# Newly created principal not yet authorized to submit jobs
RETRY_MISSING_CREATE_JOB = "bigquery.jobs.create"

# ``error.errors[].reason`` values that mark a transient backend condition
RETRYABLE_REASONS = frozenset({
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "backendError",
    "jobRateLimitExceeded",
})

# Backend message fragments recognized when translating a failed query
NO_MATCHING_SIGNATURE = "No matching signature for operator "
PARTITION_ELIMINATION = "can be used for partition elimination"
ERROR_WHILE_READING_TABLE = "Error while reading table"
