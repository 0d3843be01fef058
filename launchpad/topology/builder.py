# launchpad/topology/builder.py
"""
Builds the deployment topology for the web service.

Realization order:
1. Network: VPC, public subnet, internet gateway, default route
2. Image repository and cluster
3. Firewall: one TCP ingress port, unrestricted egress
4. Execution role and log group
5. Task definition (image pinned to the "latest" tag)
6. Service with a single public instance
"""

from launchpad.topology.config import StackConfig
from launchpad.topology.graph import Topology
from launchpad.topology.resources import (
    ANY_IPV4,
    Cluster,
    ContainerDefinition,
    ExecutionRole,
    FirewallRule,
    ImageRepository,
    InternetGateway,
    LogGroup,
    Network,
    PortMapping,
    Route,
    RouteTable,
    RouteTableAssociation,
    SecurityGroup,
    Service,
    Subnet,
    TaskDefinition,
)


def build_topology(config: StackConfig = StackConfig()) -> Topology:
    """Declare every resource the service needs. No I/O."""
    topology = Topology(stack_id=config.stack_id, region=config.region)
    project = config.project

    # -------------------------
    # NETWORK
    # -------------------------

    vpc = topology.add(Network(
        "LaunchpadVpc",
        cidr_block=config.vpc_cidr,
        enable_dns_support=True,
        enable_dns_hostnames=True,
        tags={"Name": f"{project}-vpc"},
    ))

    # Public IPs let the task reach the registry and the browser reach the task
    public_subnet = topology.add(Subnet(
        "PublicSubnet",
        network=vpc,
        cidr_block=config.public_subnet_cidr,
        map_public_ip_on_launch=True,
        tags={"Name": f"{project}-public-subnet"},
    ))

    gateway = topology.add(InternetGateway(
        "Gateway",
        network=vpc,
        tags={"Name": f"{project}-igw"},
    ))

    route_table = topology.add(RouteTable(
        "PublicRouteTable",
        network=vpc,
        tags={"Name": f"{project}-public-rt"},
    ))

    public_route = topology.add(Route(
        "PublicRoute",
        route_table=route_table,
        gateway=gateway,
        destination_cidr_block=ANY_IPV4,
    ))

    public_association = topology.add(RouteTableAssociation(
        "PublicSubnetAssoc",
        subnet=public_subnet,
        route_table=route_table,
    ))

    # -------------------------
    # REGISTRY / CLUSTER
    # -------------------------

    repository = topology.add(ImageRepository(
        "AppRepo",
        name=config.repository_name,
        force_delete=True,
    ))

    cluster = topology.add(Cluster(
        "Cluster",
        name=config.cluster_name,
    ))

    # -------------------------
    # FIREWALL
    # -------------------------

    security_group = topology.add(SecurityGroup(
        "AppSg",
        name=f"{project}-app-sg",
        network=vpc,
        description=f"Allow TCP {config.container_port} to the {project} service",
        ingress=(
            FirewallRule(
                protocol="tcp",
                from_port=config.container_port,
                to_port=config.container_port,
            ),
        ),
        egress=(
            FirewallRule(protocol="-1", from_port=0, to_port=0),
        ),
    ))

    # -------------------------
    # RUNTIME IDENTITY / LOGS
    # -------------------------

    execution_role = topology.add(ExecutionRole(
        "EcsExecutionRole",
        name=f"{project}-ecs-exec-role",
    ))

    log_group = topology.add(LogGroup(
        "LogGroup",
        name=config.log_group_name,
        retention_in_days=config.log_retention_days,
    ))

    # -------------------------
    # TASK / SERVICE
    # -------------------------

    task_definition = topology.add(TaskDefinition(
        "AppTask",
        family=f"{project}-app",
        cpu=config.cpu,
        memory=config.memory,
        execution_role=execution_role,
        container=ContainerDefinition(
            name=f"{project}-container",
            repository=repository,
            log_group=log_group,
            log_region=config.region,
            port_mappings=(
                PortMapping(
                    container_port=config.container_port,
                    host_port=config.container_port,
                ),
            ),
        ),
    ))

    topology.add(Service(
        "AppService",
        name=f"{project}-service",
        cluster=cluster,
        task_definition=task_definition,
        subnets=(public_subnet,),
        security_groups=(security_group,),
        desired_count=config.desired_count,
        assign_public_ip=True,
        routes=(public_route, public_association),
    ))

    return topology
