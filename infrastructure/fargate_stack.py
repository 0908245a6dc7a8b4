from aws_cdk import (
    Stack,
    Duration,
    RemovalPolicy,
    CfnOutput,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_ecr as ecr,
    aws_elasticloadbalancingv2 as elbv2,
    aws_logs as logs,
    aws_servicediscovery as servicediscovery,
    aws_iam as iam,
)
from constructs import Construct

# ECS Exec (Session Manager) で必要になるアクション
ECS_EXEC_ACTIONS = [
    "ssmmessages:CreateControlChannel",
    "ssmmessages:CreateDataChannel",
    "ssmmessages:OpenControlChannel",
    "ssmmessages:OpenDataChannel",
    "logs:CreateLogStream",
    "logs:DescribeLogGroups",
    "logs:DescribeLogStreams",
    "logs:PutLogEvents",
]


class CdkFargateExampleStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, config: dict, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        prefix = config["prefix"]
        container_name = config["container_name"]
        container_port = config["container_port"]

        # ---------------------------------------------------------
        # 1. ECR (Container Registry)
        # ---------------------------------------------------------
        app_container_repo = ecr.Repository(self, "appContainerRepo",
            repository_name=f"{prefix}-app",
            image_scan_on_push=True,
            image_tag_mutability=ecr.TagMutability.MUTABLE,
        )

        # ---------------------------------------------------------
        # 2. VPC & Cluster
        # ---------------------------------------------------------
        # NAT Gateway なし。パブリックサブネットのみ
        vpc = ec2.Vpc(self, "Vpc",
            ip_addresses=ec2.IpAddresses.cidr(config["vpc_cidr"]),
            enable_dns_hostnames=True,
            enable_dns_support=True,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    cidr_mask=config["subnet_cidr_mask"],
                    name="public",
                    subnet_type=ec2.SubnetType.PUBLIC,
                ),
            ],
        )

        cluster = ecs.Cluster(self, "cluster", vpc=vpc)

        # ---------------------------------------------------------
        # 3. Security Groups
        # ---------------------------------------------------------
        alb_security_group = ec2.SecurityGroup(self, "albSecurityGroup",
            security_group_name=f"{prefix}-alb-security-group",
            vpc=vpc,
        )
        alb_security_group.add_ingress_rule(ec2.Peer.any_ipv4(), ec2.Port.tcp(80))

        # ALB からの通信のみ許可
        service_security_group = ec2.SecurityGroup(self, "serviceSecurityGroup",
            security_group_name=f"{prefix}-service-security-group",
            vpc=vpc,
        )
        service_security_group.add_ingress_rule(alb_security_group, ec2.Port.all_tcp())

        # ---------------------------------------------------------
        # 4. Cloud Map (Service Discovery)
        # ---------------------------------------------------------
        cloudmap_namespace = servicediscovery.PrivateDnsNamespace(self, "namespace",
            name=config["namespace_name"],
            vpc=vpc,
        )

        # ---------------------------------------------------------
        # 5. IAM Roles
        # ---------------------------------------------------------
        ecs_exec_policy_statement = iam.PolicyStatement(
            sid="allowECSExec",
            resources=["*"],
            actions=ECS_EXEC_ACTIONS,
        )

        task_role = iam.Role(self, "taskRole",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
        )
        task_role.add_to_policy(ecs_exec_policy_statement)

        task_execution_role = iam.Role(self, "taskExecutionRole",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AmazonECSTaskExecutionRolePolicy"
                ),
            ],
        )

        # ---------------------------------------------------------
        # 6. CloudWatch Logs
        # ---------------------------------------------------------
        log_group = logs.LogGroup(self, "logGroup",
            log_group_name=prefix,
            removal_policy=RemovalPolicy.DESTROY, # スタック削除時にロググループも消す
        )

        # ---------------------------------------------------------
        # 7. ALB (Load Balancer)
        # ---------------------------------------------------------
        alb = elbv2.ApplicationLoadBalancer(self, "alb",
            vpc=vpc,
            internet_facing=True,
            security_group=alb_security_group,
            vpc_subnets=ec2.SubnetSelection(subnets=vpc.public_subnets),
        )

        # ---------------------------------------------------------
        # 8. Task Definition & Container
        # ---------------------------------------------------------
        task_definition = ecs.FargateTaskDefinition(self, "taskDefinition",
            memory_limit_mib=config["memory_limit_mib"],
            cpu=config["cpu"],
            execution_role=task_execution_role,
            task_role=task_role,
        )

        # イメージは別途 push 済みの前提。名前で参照する
        image = ecs.ContainerImage.from_ecr_repository(
            ecr.Repository.from_repository_name(self, "appImage", f"{prefix}-app")
        )

        task_definition.add_container("container",
            image=image,
            container_name=container_name,
            logging=ecs.LogDriver.aws_logs(
                stream_prefix=prefix,
                log_group=log_group,
            ),
            port_mappings=[
                ecs.PortMapping(
                    container_port=container_port,
                    host_port=container_port,
                    protocol=ecs.Protocol.TCP,
                ),
            ],
        )

        # ---------------------------------------------------------
        # 9. Fargate Service
        # ---------------------------------------------------------
        # ECS Exec を有効化 (aws ecs execute-command で接続可能)
        fargate_service = ecs.FargateService(self, "fargateService",
            cluster=cluster,
            desired_count=config["desired_count"],
            assign_public_ip=True, # NAT なしなので ECR からの pull にパブリック IP が必要
            task_definition=task_definition,
            enable_execute_command=True,
            cloud_map_options=ecs.CloudMapOptions(
                cloud_map_namespace=cloudmap_namespace,
                container_port=container_port,
                dns_record_type=servicediscovery.DnsRecordType.A,
                dns_ttl=Duration.seconds(config["dns_ttl_seconds"]),
            ),
            security_groups=[service_security_group],
        )

        # ---------------------------------------------------------
        # 10. Listener (ALB -> Service)
        # ---------------------------------------------------------
        listener = alb.add_listener("albListener", port=80)
        fargate_service.register_load_balancer_targets(
            ecs.EcsTarget(
                container_name=container_name,
                container_port=container_port,
                new_target_group_id="Ecs",
                listener=ecs.ListenerConfig.application_listener(listener,
                    protocol=elbv2.ApplicationProtocol.HTTP,
                ),
            ),
        )

        # ---------------------------------------------------------
        # 11. Outputs
        # ---------------------------------------------------------
        CfnOutput(self, "LoadBalancerDNS",
            value=alb.load_balancer_dns_name,
            description="Application Load Balancer DNS name",
        )
        CfnOutput(self, "ECRRepositoryURI",
            value=app_container_repo.repository_uri,
            description="ECR repository URI for pushing Docker images",
        )
        CfnOutput(self, "ClusterName",
            value=cluster.cluster_name,
            description="ECS cluster name (for aws ecs execute-command)",
        )
