from .corpus import LessonCorpus

__all__ = ["LessonCorpus"]
