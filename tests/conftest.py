"""Pytest configuration and fixtures.

Puts the project root on sys.path so `infrastructure` and `backend` import
the same way `app.py` imports them.
"""

import sys
from pathlib import Path

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

project_dir = Path(__file__).parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from infrastructure.config import CONFIG  # noqa: E402
from infrastructure.fargate_stack import CdkFargateExampleStack  # noqa: E402


@pytest.fixture(scope="session")
def stack():
    """Synthesize the stack once for the whole session."""
    app = cdk.App()
    return CdkFargateExampleStack(
        app,
        CONFIG["stack_name"],
        config=dict(CONFIG),
        env=cdk.Environment(region=CONFIG["default_region"]),
    )


@pytest.fixture(scope="session")
def template(stack):
    return Template.from_stack(stack)
