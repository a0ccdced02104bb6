"""Pytest 配置"""

import pytest

from muxlayout.telemetry import metrics

SAMPLE_PARTS = """# Parts Library

## pm
role: pm

## worker
role: worker

## curator
role: curator

## remote
role: remote

## rig
COL(remote 70%, worker 30%)

## dev-pair
ROW(worker, worker)

## dev-station
COL(pm 30%, dev-pair 70%)

## gpu-station
COL(rig 80%, curator 20%)
"""


@pytest.fixture
def sample_parts() -> str:
    """示例 parts.md 内容"""
    return SAMPLE_PARTS


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()
