# launchpad/core/constants.py
"""Values shared by the service process and the deployment topology."""

# The firewall ingress rule and the listener must agree on this port.
DEFAULT_PORT = 3000

# Wildcard bind so the container is reachable from outside its network namespace
BIND_HOST = "0.0.0.0"

# Fargate stops a task 30s after SIGTERM; stay below that.
GRACE_PERIOD_SECONDS = 20.0

PROJECT_NAME = "launchpad"
