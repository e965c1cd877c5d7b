"""LDPC utilities: parity-check graph, belief-propagation decoder, encoder."""

from .graph import ParityCheckGraph
from .algebra import sgn, phi, BeliefAlgebra, PRODUCT_BP, LOG_BP, MIN_SUM, ALGEBRAS
from .decoder import LdpcDecoder
from .encode import encode_systematic, generator_matrix

__all__ = [
    "ParityCheckGraph",
    "sgn",
    "phi",
    "BeliefAlgebra",
    "PRODUCT_BP",
    "LOG_BP",
    "MIN_SUM",
    "ALGEBRAS",
    "LdpcDecoder",
    "encode_systematic",
    "generator_matrix",
]
