from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "sender", "receiver", "message_type", "created_at", "is_read")
    list_filter = ("message_type", "is_read", "created_at")
    search_fields = ("sender__email", "receiver__email", "content")
    readonly_fields = ("created_at", "read_at")
