"""项目内使用的自定义异常定义。"""


class ImageCropperError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ImageCropperError):
    """配置不合法时抛出。"""


class ImageLoadingError(ImageCropperError):
    """图片加载失败。"""


class InvalidCropError(ImageCropperError):
    """裁剪区域宽或高为 0。"""


class CropOutOfBoundsError(ImageCropperError):
    """裁剪区域超出源图片范围。"""


class MaskError(ImageCropperError):
    """圆角蒙版参数无法应用。"""


class InvalidGeometryError(MaskError):
    """待处理图片尺寸非法。"""


class InsetTooLargeError(MaskError):
    """内缩后可用区域为空。"""


class DirectoryCreateError(ImageCropperError):
    """输出目录创建失败。"""


class ImageWriteError(ImageCropperError):
    """输出写入失败。"""
