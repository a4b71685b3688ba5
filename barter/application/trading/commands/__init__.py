"""Trading commands (write operations)."""

from .complete_trade import CompleteTradeCommand
from .confirm_delivery import ConfirmDeliveryCommand
from .propose_trade import ProposeTradeCommand
from .respond_to_trade import AcceptTradeCommand, CancelTradeCommand, RejectTradeCommand
from .update_shipping import UpdateShippingCommand
from .update_trade import UpdateTradeCommand

__all__ = [
    "ProposeTradeCommand",
    "UpdateTradeCommand",
    "AcceptTradeCommand",
    "RejectTradeCommand",
    "CancelTradeCommand",
    "UpdateShippingCommand",
    "ConfirmDeliveryCommand",
    "CompleteTradeCommand",
]
