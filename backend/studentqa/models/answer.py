from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from studentqa.database import Base


class Answer(Base):
    """
    Answer model representing a reply to a question.
    The question author or staff can flag it as the accepted solution.
    """
    __tablename__ = 'answers'

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Owning user (users live outside this package)
    user_id = Column(Integer, nullable=False, index=True)

    # Foreign key to questions table
    question_id = Column(
        Integer,
        ForeignKey('questions.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    # Answer content
    author = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_solution = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    question = relationship('Question', back_populates='answers')

    def __repr__(self):
        return f"<Answer(id={self.id}, question_id={self.question_id}, author='{self.author}')>"
