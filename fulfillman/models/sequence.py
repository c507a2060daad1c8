"""
Code sequence for atomic document number generation.

Order numbers (YYYYMMDD-NNNN) and purchase-order numbers (PO-YYYYMM-NNNN)
are drawn from a per-prefix counter locked with SELECT FOR UPDATE.
"""

from django.db import models, transaction
from django.utils.translation import gettext_lazy as _


class CodeSequence(models.Model):
    """
    Atomic counter for generating sequential codes.

    One row per prefix, e.g. "20261019-" → last_value = 42.

    Usage:
        seq_val = CodeSequence.next_value("20261019-")
        # Returns 1, 2, 3... atomically
    """

    prefix = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_("Prefix"),
    )
    last_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Last value"),
    )

    class Meta:
        db_table = "fulfillman_code_sequence"
        verbose_name = _("Code sequence")
        verbose_name_plural = _("Code sequences")

    def __str__(self) -> str:
        return f"{self.prefix} → {self.last_value}"

    @classmethod
    def next_value(cls, prefix: str) -> int:
        """Atomically increment and return the next value for a prefix."""
        with transaction.atomic():
            seq, created = cls.objects.select_for_update().get_or_create(
                prefix=prefix, defaults={"last_value": 0}
            )
            seq.last_value += 1
            seq.save(update_fields=["last_value"])
            return seq.last_value

    @classmethod
    def next_code(cls, prefix: str, width: int = 4) -> str:
        """Return ``prefix`` followed by the zero-padded next value."""
        return f"{prefix}{cls.next_value(prefix):0{width}d}"
