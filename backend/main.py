import logging
import os
import socket
from typing import Optional

from fastapi import FastAPI
from pydantic import BaseModel

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- Configuration ---

APP_NAME = os.getenv("APP_NAME", "cdk-fargate-example-app")

app = FastAPI(title=APP_NAME)

# --- Models ---

class HealthStatus(BaseModel):
    status: str
    service: str

class ServiceInfo(BaseModel):
    service: str
    hostname: str
    region: Optional[str] = None # タスク外 (ローカル) では None

# --- API Endpoints ---

# ALB のヘルスチェックは "/" に来る
@app.get("/", response_model=HealthStatus)
async def health():
    return HealthStatus(status="ok", service=APP_NAME)

@app.get("/api/info", response_model=ServiceInfo)
async def info():
    # Fargate では AWS_REGION がタスクに自動で渡される
    region = os.getenv("AWS_REGION")
    hostname = socket.gethostname()
    logger.info("Info requested: host=%s region=%s", hostname, region)
    return ServiceInfo(service=APP_NAME, hostname=hostname, region=region)
