__version__ = "0.1.0"

from realms_strategies.core import (
    BaseAdapter,
    Cluster,
    ConnectionContext,
    InstructionDataWithHoldUpTime,
)

__all__ = [
    "__version__",
    "BaseAdapter",
    "Cluster",
    "ConnectionContext",
    "InstructionDataWithHoldUpTime",
]
