"""
Numbering for order and invoice codes.

Codes come from a stored counter per prefix, never from counting rows,
so deleted orders or invoices do not free their numbers.
"""

from django.db import models, transaction
from django.utils.translation import gettext_lazy as _


class CodeSequence(models.Model):
    """
    Last number handed out for a code prefix.

    Orders share one global prefix ("CMD"). Invoices use one prefix per
    year ("FACT-2026"), so their numbering restarts every January.
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
        db_table = "labman_code_sequence"
        verbose_name = _("Code sequence")
        verbose_name_plural = _("Code sequences")

    def __str__(self) -> str:
        return f"{self.prefix}: {self.last_value}"

    @classmethod
    def next_value(cls, prefix: str) -> int:
        """
        Bump the counter for prefix and return the new value.

        The row is locked until the surrounding transaction ends, so two
        writers never receive the same number. The first call for a
        prefix starts at 1.
        """
        with transaction.atomic():
            seq, _created = cls.objects.select_for_update().get_or_create(prefix=prefix)
            seq.last_value += 1
            seq.save(update_fields=["last_value"])
            return seq.last_value
