from typing import List

from pydantic import BaseModel

from videohub.db.models import Comment, Notification, Video


class CommentView(BaseModel):
    author: str
    content: str
    likes: int
    replies: List["CommentView"] = []

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentView":
        return cls(
            author=comment.author,
            content=comment.content,
            likes=comment.like_count,
            replies=[cls.from_comment(reply) for reply in comment.replies],
        )


class VideoView(BaseModel):
    """Public shape of a video: no content blob, likes as a count."""
    id: str
    title: str
    owner: str
    likes: int
    comments: List[CommentView] = []

    @classmethod
    def from_video(cls, video: Video) -> "VideoView":
        return cls(
            id=video.id,
            title=video.title,
            owner=video.owner,
            likes=video.like_count,
            comments=[CommentView.from_comment(c) for c in video.comments],
        )


class VideoSummary(BaseModel):
    id: str
    title: str


class NotificationView(BaseModel):
    uploader: str
    video: VideoSummary

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationView":
        video = notification.video
        return cls(uploader=notification.uploader, video=VideoSummary(id=video.id, title=video.title))
