from entityguard.dataloader.config_loader import ConfigLoader
from entityguard.dataloader.descriptor_loader import DescriptorLoader

__all__ = ["ConfigLoader", "DescriptorLoader"]
