from skimage.metrics import peak_signal_noise_ratio
from skimage.metrics import structural_similarity


def ssim(image_a, image_b, data_range=255):
    return structural_similarity(
        image_a,
        image_b,
        data_range=data_range,
        channel_axis=-1 if image_a.ndim == 3 else None,
    )


def psnr(image_true, image_test, data_range=255):
    return peak_signal_noise_ratio(image_true, image_test, data_range=data_range)
