import cv2
import numpy as np



def load_image(image_path : str) -> np.ndarray:
    """
    Reads an image from disk as RGB.

    Parameters
    ----------
    image_path : str
        The path to the image.

    Returns
    -------
    np.ndarray
        The image, (H, W, 3) uint8 RGB.

    Raises
    ------
    FileNotFoundError
        If OpenCV cannot read the image.
    """
    image = cv2.imread(image_path, cv2.IMREAD_COLOR)

    if image is None:
        raise FileNotFoundError(f"Could not load image {image_path}")

    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def prepare_image(
    image : np.ndarray,
    output_width : int,
    output_height : int) -> np.ndarray:
    """
    Scales an image into the morph canvas. The aspect ratio is not
    preserved, matching how the landmarks are normalized.

    Parameters
    ----------
    image : np.ndarray
        Grayscale (H, W), RGB (H, W, 3) or RGBA (H, W, 4) image.
    output_width : int
        The width of the canvas.
    output_height : int
        The height of the canvas.

    Returns
    -------
    np.ndarray
        The resized image, (output_height, output_width, 3) uint8 RGB.
    """
    # Expand grayscale, drop alpha.
    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    elif image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)

    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.shape[:2] == (output_height, output_width):
        return image.copy()

    return cv2.resize(
        image,
        (output_width, output_height),
        interpolation=cv2.INTER_LINEAR)


def save_image(image_path : str, image : np.ndarray):
    """
    Writes an RGB or RGBA image to disk.

    Raises
    ------
    OSError
        If OpenCV cannot write the file.
    """
    if image.ndim == 2:
        bgr_image = image
    elif image.shape[2] == 4:
        bgr_image = cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)
    else:
        bgr_image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)

    if not cv2.imwrite(image_path, bgr_image):
        raise OSError(f"Could not write image {image_path}")
