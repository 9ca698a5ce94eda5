from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from studentqa.database import Base


class Question(Base):
    """
    Question model representing a question posted by a student.
    Answers reference it through a foreign key.
    """
    __tablename__ = 'questions'

    # Primary key
    id = Column(Integer, primary_key=True)

    # Posting user
    user_id = Column(Integer, nullable=False, index=True)
    author = Column(String(255), nullable=False)

    # Question content
    title = Column(String(512), nullable=False)
    content = Column(Text, nullable=False, default='')

    # Timestamp
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # Relationships
    answers = relationship(
        'Answer',
        back_populates='question',
        cascade='all, delete-orphan',  # Delete answers when question is deleted
        passive_deletes=True,
        order_by='Answer.id'
    )

    def __repr__(self):
        return f"<Question(id={self.id}, title='{self.title}')>"
