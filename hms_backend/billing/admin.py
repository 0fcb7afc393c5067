from django.contrib import admin

from .models import Bill


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'amount', 'status', 'payment_method', 'billing_date', 'paid_at')
    list_filter = ('status', 'payment_method')
    search_fields = ('patient__full_name',)
    list_select_related = ('patient',)
    ordering = ('-billing_date', '-id')
    # Status changes go through billing.services.settle_bill.
    readonly_fields = ('status', 'payment_method', 'paid_at', 'billing_date')
