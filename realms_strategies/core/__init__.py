from realms_strategies.core.adapters.BaseAdapter import BaseAdapter
from realms_strategies.core.adapters.models import InstructionDataWithHoldUpTime
from realms_strategies.core.constants.everlend import Cluster
from realms_strategies.core.utils.solana import ConnectionContext

__all__ = [
    "BaseAdapter",
    "Cluster",
    "ConnectionContext",
    "InstructionDataWithHoldUpTime",
]
