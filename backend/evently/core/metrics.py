"""
Prometheus counters for the data layer.
The hosting process decides how to expose them (e.g. prometheus_client.start_http_server).
"""

from prometheus_client import Counter

# Database metrics
db_operations = Counter(
    'evently_db_operations_total',
    'Total database operations',
    ['operation']  # insert, update, delete, read, exists
)

connection_attempts = Counter(
    'evently_db_connection_attempts_total',
    'Database connection establishment attempts',
    ['result']  # success, failure
)

# Pipeline metrics
validation_failures = Counter(
    'evently_validation_failures_total',
    'Records rejected by the normalization pipeline',
    ['record']  # event, booking
)

unique_violations = Counter(
    'evently_unique_violations_total',
    'Writes rejected by a unique index',
    ['record']  # event, booking
)


def record_db_operation(operation: str):
    """Record database operation. Operation: insert, update, delete, read, exists"""
    db_operations.labels(operation=operation).inc()

def record_connection_attempt(success: bool):
    result = "success" if success else "failure"
    connection_attempts.labels(result=result).inc()

def record_validation_failure(record: str):
    validation_failures.labels(record=record).inc()

def record_unique_violation(record: str):
    unique_violations.labels(record=record).inc()
