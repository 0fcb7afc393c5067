from django.db import models


class Bill(models.Model):
    """Invoice for a patient.

    Lifecycle: Unpaid -> Paid, nothing else. payment_method and paid_at are
    set exactly when the bill becomes Paid (see services.settle_bill).
    """

    STATUS_UNPAID = 'Unpaid'
    STATUS_PAID = 'Paid'
    STATUS_CHOICES = [
        (STATUS_UNPAID, 'Unpaid'),
        (STATUS_PAID, 'Paid'),
    ]

    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.CASCADE,
        related_name='bills',
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_UNPAID, db_index=True)
    payment_method = models.CharField(max_length=64, null=True, blank=True)
    billing_date = models.DateTimeField(auto_now_add=True, db_index=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'billing'
        ordering = ['-billing_date', '-id']
        verbose_name = 'Bill'
        verbose_name_plural = 'Bills'

    def __str__(self) -> str:
        return f"Inv #{self.pk} {self.amount} ({self.status})"

    @property
    def is_paid(self) -> bool:
        return self.status == self.STATUS_PAID
