"""Interfaces to the external compute and render pipelines."""

from auto_adjust.gateway.base import AutoComputeGateway, ComputeResult, RenderGateway

__all__ = ['AutoComputeGateway', 'ComputeResult', 'RenderGateway']
