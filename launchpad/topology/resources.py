# launchpad/topology/resources.py
"""Declarative infrastructure resources."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


ANY_IPV4 = "0.0.0.0/0"

ECS_TASK_EXECUTION_POLICY_ARN = (
    "arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy"
)


# ============================================
# BASE
# ============================================

@dataclass(frozen=True)
class Resource:
    """An immutable resource declaration with a logical identity."""
    logical_id: str

    def dependencies(self) -> Tuple["Resource", ...]:
        """Resources that must exist before this one."""
        return ()

    def dependency_ids(self) -> Tuple[str, ...]:
        return tuple(dep.logical_id for dep in self.dependencies())


# ============================================
# NETWORK
# ============================================

@dataclass(frozen=True)
class Network(Resource):
    """Isolated address space (VPC)."""
    cidr_block: str
    enable_dns_support: bool = True
    enable_dns_hostnames: bool = True
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Subnet(Resource):
    network: Network
    cidr_block: str
    map_public_ip_on_launch: bool = False
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def public(self) -> bool:
        return self.map_public_ip_on_launch

    def dependencies(self):
        return (self.network,)


@dataclass(frozen=True)
class InternetGateway(Resource):
    """Internet ingress/egress point attached to a network."""
    network: Network
    tags: Dict[str, str] = field(default_factory=dict)

    def dependencies(self):
        return (self.network,)


@dataclass(frozen=True)
class RouteTable(Resource):
    network: Network
    tags: Dict[str, str] = field(default_factory=dict)

    def dependencies(self):
        return (self.network,)


@dataclass(frozen=True)
class Route(Resource):
    route_table: RouteTable
    gateway: InternetGateway
    destination_cidr_block: str = ANY_IPV4

    def dependencies(self):
        return (self.route_table, self.gateway)


@dataclass(frozen=True)
class RouteTableAssociation(Resource):
    subnet: Subnet
    route_table: RouteTable

    def dependencies(self):
        return (self.subnet, self.route_table)


# ============================================
# FIREWALL
# ============================================

@dataclass(frozen=True)
class FirewallRule:
    """Single allow rule. Protocol "-1" means all protocols."""
    protocol: str
    from_port: int
    to_port: int
    cidr_blocks: Tuple[str, ...] = (ANY_IPV4,)

    def allows_port(self, port: int) -> bool:
        if self.protocol == "-1":
            return True
        return self.from_port <= port <= self.to_port


@dataclass(frozen=True)
class SecurityGroup(Resource):
    name: str
    network: Network
    description: str
    ingress: Tuple[FirewallRule, ...] = ()
    egress: Tuple[FirewallRule, ...] = ()

    def dependencies(self):
        return (self.network,)


# ============================================
# REGISTRY / COMPUTE
# ============================================

@dataclass(frozen=True)
class ImageRepository(Resource):
    """Private container image store."""
    name: str
    force_delete: bool = False


@dataclass(frozen=True)
class Cluster(Resource):
    name: str


@dataclass(frozen=True)
class ExecutionRole(Resource):
    """Identity the container runtime assumes to pull images and ship logs."""
    name: str
    service_principal: str = "ecs-tasks.amazonaws.com"
    managed_policy_arns: Tuple[str, ...] = (ECS_TASK_EXECUTION_POLICY_ARN,)

    @property
    def assume_role_policy(self) -> Dict[str, Any]:
        return {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Action": "sts:AssumeRole",
                    "Principal": {"Service": self.service_principal},
                    "Effect": "Allow",
                },
            ],
        }


@dataclass(frozen=True)
class LogGroup(Resource):
    """Destination for container stdout/stderr."""
    name: str
    retention_in_days: int = 7


@dataclass(frozen=True)
class PortMapping:
    container_port: int
    host_port: int
    protocol: str = "tcp"


@dataclass(frozen=True)
class ContainerDefinition:
    name: str
    repository: ImageRepository
    log_group: LogGroup
    log_region: str
    port_mappings: Tuple[PortMapping, ...] = ()
    # Always the moving tag; images are not pinned by digest.
    image_tag: str = "latest"
    log_stream_prefix: str = "ecs"


@dataclass(frozen=True)
class TaskDefinition(Resource):
    family: str
    cpu: int
    memory: int
    execution_role: ExecutionRole
    container: ContainerDefinition
    network_mode: str = "awsvpc"
    requires_compatibilities: Tuple[str, ...] = ("FARGATE",)

    def dependencies(self):
        return (
            self.container.repository,
            self.execution_role,
            self.container.log_group,
        )


@dataclass(frozen=True)
class Service(Resource):
    """Long-running placement of a task definition."""
    name: str
    cluster: Cluster
    task_definition: TaskDefinition
    subnets: Tuple[Subnet, ...]
    security_groups: Tuple[SecurityGroup, ...]
    desired_count: int = 1
    launch_type: str = "FARGATE"
    assign_public_ip: bool = True
    # Routing that must be in place before tasks can reach the registry
    routes: Tuple[Resource, ...] = ()

    def dependencies(self):
        return (
            self.cluster,
            self.task_definition,
            *self.subnets,
            *self.security_groups,
            *self.routes,
        )
