#!/usr/bin/env python3
import logging

import aws_cdk as cdk
from dotenv import find_dotenv, load_dotenv

from infrastructure.config import build_environment, load_config
from infrastructure.fargate_stack import CdkFargateExampleStack

logging.basicConfig(level=logging.INFO)

# カレントディレクトリ (cdk の実行場所) の .env に CDK_DEFAULT_REGION 等があれば読み込む
load_dotenv(find_dotenv(usecwd=True))

app = cdk.App()
config = load_config(app)

# --- スタックの定義 ---
# デフォルトのリージョンは ap-northeast-1。環境変数の指定があればそちらを優先する
CdkFargateExampleStack(app, config["stack_name"],
    config=config,
    env=build_environment(config),
)

app.synth()
