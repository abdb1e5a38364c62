from .face_embedder import FaceEmbedder

__all__ = ["FaceEmbedder"]
