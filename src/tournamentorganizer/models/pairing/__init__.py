from tournamentorganizer.models.pairing.pairing_result import Pairing

__all__ = ["Pairing"]
