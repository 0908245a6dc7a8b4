import logging
import os

import aws_cdk as cdk

logger = logging.getLogger(__name__)

# --- 設定値 (Configuration) ---
CONFIG = {
    # スタック & リソース名の共通プレフィックス
    "stack_name": "CdkFargateExampleStack",
    "prefix": "cdk-fargate-example",

    # デフォルトのリージョン (CDK_DEFAULT_REGION があればそちらを優先)
    "default_region": "ap-northeast-1",

    # ネットワーク
    "vpc_cidr": "10.0.0.0/16",
    "subnet_cidr_mask": 28,
    "namespace_name": "cdk.ecs.local",

    # コンテナ & タスク
    "container_name": "app",
    "container_port": 80,
    "cpu": 256,
    "memory_limit_mib": 512,
    "desired_count": 1,
    "dns_ttl_seconds": 10,
}

# 0 を許さない数値項目
POSITIVE_INT_KEYS = ("container_port", "cpu", "memory_limit_mib", "subnet_cidr_mask", "dns_ttl_seconds")


def resolve_region(default: str = CONFIG["default_region"]) -> str:
    # 空文字は未指定として扱う
    return os.getenv("CDK_DEFAULT_REGION") or default


def build_environment(config: dict = CONFIG) -> cdk.Environment:
    env = cdk.Environment(
        account=os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=resolve_region(config["default_region"]),
    )
    logger.info("Stack environment: account=%s region=%s", env.account or "<unresolved>", env.region)
    return env


def _coerce(key: str, value, default):
    if isinstance(default, bool) or not isinstance(default, int):
        return value if isinstance(value, type(default)) else str(value)
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Config '{key}' must be an integer, got {value!r}") from e
    if key in POSITIVE_INT_KEYS and number <= 0:
        raise ValueError(f"Config '{key}' must be positive, got {number}")
    if key == "desired_count" and number < 0:
        raise ValueError(f"Config 'desired_count' must not be negative, got {number}")
    return number


def load_config(app: cdk.App, base: dict = CONFIG) -> dict:
    """Merge CDK context (cdk.json / -c key=value) over the defaults.

    Context values arrive as strings from the command line, so each one is
    coerced to the type of its default.
    """
    config = dict(base)
    for key, default in base.items():
        value = app.node.try_get_context(key)
        if value is None:
            continue
        config[key] = _coerce(key, value, default)
        logger.info("Config override from context: %s=%r", key, config[key])
    return config
