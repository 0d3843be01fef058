# launchpad/topology/config.py
from dataclasses import dataclass

from launchpad.core.constants import DEFAULT_PORT, PROJECT_NAME


@dataclass(frozen=True)
class StackConfig:
    """Every value the deployment topology is built from."""
    stack_id: str = f"{PROJECT_NAME}-dev"
    project: str = PROJECT_NAME
    region: str = "us-east-1"

    vpc_cidr: str = "10.0.0.0/16"
    public_subnet_cidr: str = "10.0.1.0/24"

    # Must match the port the service listens on
    container_port: int = DEFAULT_PORT

    cpu: int = 256      # 0.25 vCPU
    memory: int = 512   # MiB

    log_retention_days: int = 7
    desired_count: int = 1

    @property
    def repository_name(self) -> str:
        return f"{self.project}-app-repo"

    @property
    def cluster_name(self) -> str:
        return f"{self.project}-cluster"

    @property
    def log_group_name(self) -> str:
        return f"/ecs/{self.project}-app"
