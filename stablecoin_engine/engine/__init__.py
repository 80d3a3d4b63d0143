"""Collateral/debt ledgers and the operation engine."""

from stablecoin_engine.engine.dsc_engine import DSCEngine
from stablecoin_engine.engine.factory import Deployment, create_engine

__all__ = ["DSCEngine", "Deployment", "create_engine"]
