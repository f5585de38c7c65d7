from django.contrib import admin

from .models import PlatformLedgerEntry, Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'transaction_uuid', 'project', 'amount', 'currency', 'payment_method', 'payment_status',
                    'created_at')
    list_filter = ('payment_method', 'currency')
    search_fields = ('payment_intent_id', 'client_email', 'freelancer_email')

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PlatformLedgerEntry)
class PlatformLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ('id', 'transaction', 'amount', 'created_at')

    def has_change_permission(self, request, obj=None):
        return False
