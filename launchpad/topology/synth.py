# launchpad/topology/synth.py
"""Render a topology into a CloudFormation template."""

import logging
from pathlib import Path
from typing import Callable, Dict, List

from troposphere import AWSObject, GetAtt, Join, Output, Ref, Tags, Template
from troposphere import ec2, ecr, ecs, iam, logs

from launchpad.topology.graph import Topology
from launchpad.topology.resources import (
    Cluster,
    ExecutionRole,
    FirewallRule,
    ImageRepository,
    InternetGateway,
    LogGroup,
    Network,
    Route,
    RouteTable,
    RouteTableAssociation,
    SecurityGroup,
    Service,
    Subnet,
    TaskDefinition,
)

logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml")


def _attachment_id(gateway: InternetGateway) -> str:
    return f"{gateway.logical_id}Attachment"


def _rules(rules: List[FirewallRule]) -> List[ec2.SecurityGroupRule]:
    return [
        ec2.SecurityGroupRule(
            IpProtocol=rule.protocol,
            FromPort=rule.from_port,
            ToPort=rule.to_port,
            CidrIp=cidr,
        )
        for rule in rules
        for cidr in rule.cidr_blocks
    ]


# ============================================
# RENDERERS
# ============================================

def _network(r: Network, rendered):
    return [ec2.VPC(
        r.logical_id,
        CidrBlock=r.cidr_block,
        EnableDnsSupport=r.enable_dns_support,
        EnableDnsHostnames=r.enable_dns_hostnames,
        Tags=Tags(**r.tags),
    )]


def _subnet(r: Subnet, rendered):
    return [ec2.Subnet(
        r.logical_id,
        VpcId=Ref(rendered[r.network.logical_id]),
        CidrBlock=r.cidr_block,
        MapPublicIpOnLaunch=r.map_public_ip_on_launch,
        Tags=Tags(**r.tags),
    )]


def _gateway(r: InternetGateway, rendered):
    gateway = ec2.InternetGateway(r.logical_id, Tags=Tags(**r.tags))
    attachment = ec2.VPCGatewayAttachment(
        _attachment_id(r),
        VpcId=Ref(rendered[r.network.logical_id]),
        InternetGatewayId=Ref(gateway),
    )
    return [gateway, attachment]


def _route_table(r: RouteTable, rendered):
    return [ec2.RouteTable(
        r.logical_id,
        VpcId=Ref(rendered[r.network.logical_id]),
        Tags=Tags(**r.tags),
    )]


def _route(r: Route, rendered):
    # The gateway must be attached before a route can target it
    return [ec2.Route(
        r.logical_id,
        DependsOn=[_attachment_id(r.gateway)],
        RouteTableId=Ref(rendered[r.route_table.logical_id]),
        DestinationCidrBlock=r.destination_cidr_block,
        GatewayId=Ref(rendered[r.gateway.logical_id]),
    )]


def _association(r: RouteTableAssociation, rendered):
    return [ec2.SubnetRouteTableAssociation(
        r.logical_id,
        SubnetId=Ref(rendered[r.subnet.logical_id]),
        RouteTableId=Ref(rendered[r.route_table.logical_id]),
    )]


def _repository(r: ImageRepository, rendered):
    return [ecr.Repository(
        r.logical_id,
        RepositoryName=r.name,
        EmptyOnDelete=r.force_delete,
    )]


def _cluster(r: Cluster, rendered):
    return [ecs.Cluster(r.logical_id, ClusterName=r.name)]


def _security_group(r: SecurityGroup, rendered):
    return [ec2.SecurityGroup(
        r.logical_id,
        GroupName=r.name,
        GroupDescription=r.description,
        VpcId=Ref(rendered[r.network.logical_id]),
        SecurityGroupIngress=_rules(r.ingress),
        SecurityGroupEgress=_rules(r.egress),
    )]


def _execution_role(r: ExecutionRole, rendered):
    return [iam.Role(
        r.logical_id,
        RoleName=r.name,
        AssumeRolePolicyDocument=r.assume_role_policy,
        ManagedPolicyArns=list(r.managed_policy_arns),
    )]


def _log_group(r: LogGroup, rendered):
    return [logs.LogGroup(
        r.logical_id,
        LogGroupName=r.name,
        RetentionInDays=r.retention_in_days,
    )]


def _task_definition(r: TaskDefinition, rendered):
    container = r.container
    repository = rendered[container.repository.logical_id]

    container_definition = ecs.ContainerDefinition(
        Name=container.name,
        Image=Join("", [GetAtt(repository, "RepositoryUri"), ":", container.image_tag]),
        Essential=True,
        PortMappings=[
            ecs.PortMapping(
                ContainerPort=m.container_port,
                HostPort=m.host_port,
                Protocol=m.protocol,
            )
            for m in container.port_mappings
        ],
        LogConfiguration=ecs.LogConfiguration(
            LogDriver="awslogs",
            Options={
                "awslogs-group": Ref(rendered[container.log_group.logical_id]),
                "awslogs-region": container.log_region,
                "awslogs-stream-prefix": container.log_stream_prefix,
            },
        ),
    )

    return [ecs.TaskDefinition(
        r.logical_id,
        Family=r.family,
        Cpu=str(r.cpu),
        Memory=str(r.memory),
        NetworkMode=r.network_mode,
        RequiresCompatibilities=list(r.requires_compatibilities),
        ExecutionRoleArn=GetAtt(rendered[r.execution_role.logical_id], "Arn"),
        ContainerDefinitions=[container_definition],
    )]


def _service(r: Service, rendered):
    # Routes are not referenced by any property, so order them explicitly
    extra = {}
    if r.routes:
        extra["DependsOn"] = [rendered[rt.logical_id].title for rt in r.routes]

    return [ecs.Service(
        r.logical_id,
        **extra,
        ServiceName=r.name,
        Cluster=Ref(rendered[r.cluster.logical_id]),
        TaskDefinition=Ref(rendered[r.task_definition.logical_id]),
        DesiredCount=r.desired_count,
        LaunchType=r.launch_type,
        NetworkConfiguration=ecs.NetworkConfiguration(
            AwsvpcConfiguration=ecs.AwsvpcConfiguration(
                AssignPublicIp="ENABLED" if r.assign_public_ip else "DISABLED",
                Subnets=[Ref(rendered[s.logical_id]) for s in r.subnets],
                SecurityGroups=[
                    GetAtt(rendered[sg.logical_id], "GroupId")
                    for sg in r.security_groups
                ],
            ),
        ),
    )]


RENDERERS: Dict[type, Callable] = {
    Network: _network,
    Subnet: _subnet,
    InternetGateway: _gateway,
    RouteTable: _route_table,
    Route: _route,
    RouteTableAssociation: _association,
    ImageRepository: _repository,
    Cluster: _cluster,
    SecurityGroup: _security_group,
    ExecutionRole: _execution_role,
    LogGroup: _log_group,
    TaskDefinition: _task_definition,
    Service: _service,
}


# ============================================
# SYNTHESIS
# ============================================

def _outputs(topology: Topology, rendered: Dict[str, AWSObject]) -> List[Output]:
    outputs = []
    for resource in topology:
        obj = rendered[resource.logical_id]
        if isinstance(resource, ImageRepository):
            outputs.append(Output(
                f"{resource.logical_id}Uri",
                Description="Push the service image here with the latest tag",
                Value=GetAtt(obj, "RepositoryUri"),
            ))
        elif isinstance(resource, Cluster):
            outputs.append(Output(f"{resource.logical_id}Name", Value=Ref(obj)))
        elif isinstance(resource, Service):
            outputs.append(Output(f"{resource.logical_id}Name", Value=GetAtt(obj, "Name")))
    return outputs


def synthesize(topology: Topology) -> Template:
    """Render every resource, dependencies first."""
    template = Template()
    template.set_version("2010-09-09")
    template.set_description(
        f"{topology.stack_id}: network, registry, cluster and service for the web service"
    )
    template.set_metadata({
        "StackId": topology.stack_id,
        "Region": topology.region,
    })

    rendered: Dict[str, AWSObject] = {}

    for resource in topology.topological_order():
        renderer = RENDERERS.get(type(resource))
        if renderer is None:
            raise TypeError(f"No renderer for {type(resource).__name__}")

        objects = renderer(resource, rendered)
        for obj in objects:
            template.add_resource(obj)
        rendered[resource.logical_id] = objects[0]

    for output in _outputs(topology, rendered):
        template.add_output(output)

    logger.debug(f"Synthesized {len(template.resources)} CloudFormation resources")
    return template


def write_template(
    template: Template,
    outdir,
    stack_id: str,
    fmt: str = "json",
) -> Path:
    """Write the template to <outdir>/<stack_id>.template.<fmt>."""
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format {fmt!r}, expected one of {FORMATS}")

    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    path = outdir / f"{stack_id}.template.{fmt}"
    body = template.to_json() if fmt == "json" else template.to_yaml()
    path.write_text(body + "\n", encoding="utf-8")
    return path
