from ipfsreg.storage.uploader import ContentUploader

__all__ = ["ContentUploader"]
