from .harvester import HarvestResult, LiteralHarvester

__all__ = ["HarvestResult", "LiteralHarvester"]
