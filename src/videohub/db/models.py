from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass
class LikeSet:
    """Usernames that liked a video or a comment."""
    who_liked: Set[str] = field(default_factory=set)

    def like(self, user_name: str) -> bool:
        if user_name in self.who_liked:
            return False
        self.who_liked.add(user_name)
        return True

    @property
    def count(self) -> int:
        return len(self.who_liked)


@dataclass(eq=False)
class Comment:
    author: str
    content: str
    replies: List["Comment"] = field(default_factory=list)
    likes: LikeSet = field(default_factory=LikeSet)

    def add_reply(self, reply: "Comment") -> None:
        self.replies.append(reply)

    def like(self, user_name: str) -> bool:
        return self.likes.like(user_name)

    @property
    def like_count(self) -> int:
        return self.likes.count


@dataclass(eq=False)
class Video:
    """An uploaded video. The content blob lives in the ContentStore."""
    id: str
    title: str
    owner: str
    comments: List[Comment] = field(default_factory=list)
    likes: LikeSet = field(default_factory=LikeSet)

    def add_comment(self, comment: Comment) -> None:
        self.comments.append(comment)

    def like(self, user_name: str) -> bool:
        return self.likes.like(user_name)

    @property
    def like_count(self) -> int:
        return self.likes.count


@dataclass(frozen=True)
class Notification:
    """Upload event handed to every follower of ``uploader``."""
    video: Video
    uploader: str


@dataclass(eq=False)
class User:
    name: str
    password: str = field(repr=False)
    subscriptions: Set[str] = field(default_factory=set)
    followers: Set[str] = field(default_factory=set)
    videos: List[Video] = field(default_factory=list)
    pending_notifications: List[Notification] = field(default_factory=list)

    def check_password(self, password: Optional[str]) -> bool:
        return password == self.password

    def add_video(self, video: Video) -> None:
        self.videos.append(video)

    def add_subscription(self, target: "User") -> bool:
        """Follow ``target``; both sides of the edge are written together."""
        if target.name in self.subscriptions:
            return False
        self.subscriptions.add(target.name)
        target.followers.add(self.name)
        return True

    def defer_notification(self, notification: Notification) -> None:
        self.pending_notifications.append(notification)

    def release_pending_notifications(self) -> None:
        self.pending_notifications.clear()
