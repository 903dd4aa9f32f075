"""
Custody related errors
"""


class TransferError(Exception):
    """Base exception for asset and fund movements"""


class InsufficientBalance(TransferError): pass


class InsufficientAllowance(TransferError): pass


class NotAssetOwner(TransferError): pass
