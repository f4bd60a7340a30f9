"""
Service context for log lines.

Identifies which service instance produced a log line, so logs from
several replicas sharing one database can be told apart.
"""

import os
from functools import lru_cache
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'inventory-service')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a short hostname, local runs fall back to the PID
    instance_id = os.getenv('HOSTNAME') or socket.gethostname()
    if not instance_id or deploy_env == 'local_dev':
        instance_id = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance_id[:12]}'
