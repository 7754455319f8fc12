# Diagnostic statuses for the reclaim_expired lambda
SUCCESS = 'success'
ERROR = 'error'
