from django.urls import path

from chat.api.views.message_views import (
    AttachmentUploadView,
    ConversationListView,
    ConversationView,
    MarkReadView,
    MessageDetailView,
    SendMessageView,
    UnreadCountView,
)


app_name = "chat"

urlpatterns = [
    path("", SendMessageView.as_view(), name="message_send"),
    path("conversations/", ConversationListView.as_view(), name="conversation_list"),
    path("conversation/<uuid:order_id>/", ConversationView.as_view(), name="conversation"),
    path("mark-read/", MarkReadView.as_view(), name="mark_read"),
    path("unread-count/", UnreadCountView.as_view(), name="unread_count"),
    path("attachments/", AttachmentUploadView.as_view(), name="attachment_upload"),
    path("<uuid:message_id>/", MessageDetailView.as_view(), name="message_detail"),
]
