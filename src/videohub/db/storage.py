"""In-memory stores for users and videos.

Neither store locks on its own: the BackendService holds
``ServiceContext.lock`` around every call into them.
"""
import logging
from typing import Dict, List, Union

from videohub.config import settings
from videohub.db.models import Comment, User, Video
from videohub.errors import NoSuchComment, NoSuchUser, NoSuchVideo, UserAlreadyExists, WrongPassword
from videohub.ids import RandomSequenceGenerator

logger = logging.getLogger("storage")


class IdentityStore:
    def __init__(self):
        self._users: Dict[str, User] = {}

    def get(self, name: str) -> User:
        user = self._users.get(name)
        if user is None:
            raise NoSuchUser()
        return user

    def users(self) -> List[User]:
        return list(self._users.values())

    def register(self, name: str, password: str) -> User:
        if name in self._users:
            raise UserAlreadyExists()
        user = User(name=name, password=password)
        self._users[name] = user
        logger.info(f"Registered user {name}")
        return user

    def authenticate(self, name: str, password: str) -> User:
        user = self.get(name)
        if not user.check_password(password):
            raise WrongPassword()
        return user

    def follow(self, follower: User, target_name: str) -> User:
        target = self.get(target_name)
        if follower.add_subscription(target):
            logger.info(f"User {follower.name} subscribed for {target.name}")
        return target


class ContentStore:
    def __init__(self, generator: RandomSequenceGenerator, id_length: int = settings.VIDEO_ID_LENGTH):
        self._generator = generator
        self._id_length = id_length
        self._videos: List[Video] = []
        self._id_video_map: Dict[str, Video] = {}
        self._video_content: Dict[str, bytes] = {}

    def videos(self) -> List[Video]:
        return list(self._videos)

    def create_video(self, owner: User, title: str, content: bytes) -> Video:
        video_id = self._generator.next_unique(self._id_length, self._id_video_map.__contains__)
        video = Video(id=video_id, title=title, owner=owner.name)
        self._video_content[video_id] = content
        self._videos.append(video)
        self._id_video_map[video_id] = video
        owner.add_video(video)
        logger.info(f"User {owner.name} uploaded video {video_id} '{title}'")
        return video

    def get_video(self, video_id: str) -> Video:
        video = self._id_video_map.get(video_id)
        if video is None:
            raise NoSuchVideo()
        return video

    def get_content(self, video_id: str) -> bytes:
        try:
            return self._video_content[video_id]
        except KeyError:
            raise NoSuchVideo()

    @staticmethod
    def comment_at(video: Video, index: int) -> Comment:
        # Only the top-level list is addressable; negative indexes are rejected.
        if index < 0 or index >= len(video.comments):
            raise NoSuchComment()
        return video.comments[index]

    def add_comment(self, video: Video, author: str, text: str) -> Comment:
        comment = Comment(author=author, content=text)
        video.add_comment(comment)
        return comment

    def add_reply(self, video: Video, index: int, author: str, text: str) -> Comment:
        parent = self.comment_at(video, index)
        reply = Comment(author=author, content=text)
        parent.add_reply(reply)
        return reply

    @staticmethod
    def like(target: Union[Video, Comment], user_name: str) -> bool:
        return target.like(user_name)
