from .document_fields import DocumentFields
from .operators import Operator

__all__ = ["DocumentFields", "Operator"]
