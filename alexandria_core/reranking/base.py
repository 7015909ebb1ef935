"""
Abstract base class for embedding providers used by the semantic re-rank.

Providers wrap whatever model or service turns text into vectors. The
core never loads a model itself; callers pass a provider in.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence


class BaseEmbeddingProvider(ABC):
    """
    Abstract base class for embedding providers.
    
    All providers must implement this interface to be swappable.
    """
    
    @abstractmethod
    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed texts.
        
        Args:
            texts: Texts to embed
            
        Returns:
            One vector per input text, in input order
        """
        pass
    
    @abstractmethod
    def get_model_info(self) -> dict:
        """
        Get information about the embedding model.
        
        Returns:
            Dict with keys: name, type, dimensions
        """
        pass
    
    def close(self):
        """Optional cleanup (close API clients, free GPU memory, etc.)"""
        pass
