import enum
from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Status(str, enum.Enum):
    waiting = "waiting"
    confirm = "confirm"
    unconfirm = "unconfirm"


class UserRole(str, enum.Enum):
    admin = "admin"
    user = "user"
    guest = "guest"


class Article(Base):
    __tablename__ = 'articles'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    date = Column(BigInteger, nullable=False)  # ns since epoch
    image = Column(String, nullable=True)  # opaque blob handle
    archived = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Article(id={self.id}, title='{self.title[:30]}', archived={self.archived})>"


class Rumor(Base):
    __tablename__ = 'rumors'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    date = Column(BigInteger, nullable=False)
    status = Column(String, default=Status.waiting.value, nullable=False)
    archived = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Rumor(id={self.id}, title='{self.title[:30]}', status={self.status})>"


class Discussion(Base):
    __tablename__ = 'discussions'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    category = Column(String, nullable=False, default='')
    archived = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Discussion(id={self.id}, title='{self.title[:30]}', category='{self.category}')>"


class Comment(Base):
    __tablename__ = 'comments'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True)
    # Not a ForeignKey: the id may belong to any content type.
    content_id = Column(Integer, nullable=False, index=True)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    archived = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Comment(id={self.id}, content_id={self.content_id}, author='{self.author}')>"


class Trending(Base):
    __tablename__ = 'trending'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True)
    content_id = Column(Integer, nullable=False)
    content_type = Column(String, nullable=False)  # 'article', 'rumor', 'discussion'
    timestamp = Column(BigInteger, nullable=False)  # when curated

    def __repr__(self):
        return f"<Trending(id={self.id}, {self.content_type}#{self.content_id})>"


class Group(Base):
    __tablename__ = 'groups'

    name = Column(String, primary_key=True)
    member_count = Column(Integer, default=0, nullable=False)
    formation_date = Column(BigInteger, default=0, nullable=False)
    base_location = Column(String, default='', nullable=False)
    theater_location = Column(String, default='', nullable=False)

    # Embedded sub-collections, always replaced as a whole
    members = Column(JSON, default=[], nullable=False)
    schedules = Column(JSON, default=[], nullable=False)
    news = Column(JSON, default=[], nullable=False)
    discography = Column(JSON, default={}, nullable=False)
    setlists = Column(JSON, default=[], nullable=False)

    def __repr__(self):
        return f"<Group(name='{self.name}', member_count={self.member_count})>"


class UserRoleAssignment(Base):
    __tablename__ = 'user_roles'

    principal = Column(String, primary_key=True)
    role = Column(String, nullable=False)

    def __repr__(self):
        return f"<UserRoleAssignment(principal='{self.principal}', role='{self.role}')>"


class UserProfile(Base):
    __tablename__ = 'user_profiles'

    principal = Column(String, primary_key=True)
    name = Column(String, nullable=False)

    def __repr__(self):
        return f"<UserProfile(principal='{self.principal}', name='{self.name}')>"


class Setting(Base):
    __tablename__ = 'settings'

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
    type = Column(String, nullable=False, default='string') # 'string', 'integer', 'boolean', 'list'
    description = Column(String, nullable=True)

    def __repr__(self):
        return f"<Setting(key='{self.key}', value='{self.value}')>"
