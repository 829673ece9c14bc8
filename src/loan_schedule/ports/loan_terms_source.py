from __future__ import annotations

from abc import ABC, abstractmethod

from loan_schedule.domain.loan import LoanTerms


class LoanTermsSource(ABC):
    """
    Port for loading loan terms from an external source.

    Contract:
        - Parsing failures are reported as ValidationError with per-field
          errors, never as raw conversion exceptions
        - Domain invariants are left to LoanTerms itself
    """

    @abstractmethod
    def load(self) -> LoanTerms:
        """
        Load and validate loan terms.

        Returns:
            Validated LoanTerms

        Raises:
            ValidationError: If the source is missing fields or holds bad values
        """
        ...
