from .network import DROPOUT_RATES, HIDDEN_UNITS, FieldNetwork

__all__ = ["DROPOUT_RATES", "FieldNetwork", "HIDDEN_UNITS"]
