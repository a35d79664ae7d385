import sys
import time

import napari

from tvdenoise.tv_restoration.denoiser import TVDenoiser
from tvdenoise.utils.io.datasets import add_noise, astronaut, camera
from tvdenoise.utils.metrics.image_metrics import psnr, ssim


def printscore(header, val1, val2):
    print(f"{header}: \t {val1:.4f} \t {val2:.4f}")


def demo(image, lambda_=0.0259624705, max_iter=500):
    noisy_image = add_noise(image, variance=0.01)

    multichannel = TVDenoiser(lambda_=lambda_, max_iter=max_iter, mode='multichannel')
    each_channel = TVDenoiser(lambda_=lambda_, max_iter=max_iter, mode='each_channel', workers=3)

    start = time.time()
    denoised_multichannel = multichannel.denoise_pixels(noisy_image)
    stop = time.time()
    print(f"multichannel: elapsed time:  {stop - start} ")

    start = time.time()
    denoised_each_channel = each_channel.denoise_pixels(noisy_image)
    stop = time.time()
    print(f"each channel: elapsed time:  {stop - start} ")

    print("Below in order: PSNR, SSIM: ")
    printscore(
        "noisy image           ",
        psnr(image, noisy_image),
        ssim(image, noisy_image),
    )
    printscore(
        "tv (multichannel)     ",
        psnr(image, denoised_multichannel),
        ssim(image, denoised_multichannel),
    )
    printscore(
        "tv (each channel)     ",
        psnr(image, denoised_each_channel),
        ssim(image, denoised_each_channel),
    )

    viewer = napari.Viewer()
    viewer.add_image(image, name='image')
    viewer.add_image(noisy_image, name='noisy')
    viewer.add_image(denoised_multichannel, name='denoised_multichannel')
    viewer.add_image(denoised_each_channel, name='denoised_each_channel')
    napari.run()


if __name__ == '__main__':
    image_name = 'astronaut'
    if len(sys.argv) > 1:
        image_name = sys.argv[1].rstrip().lstrip()
    image = camera() if image_name == 'camera' else astronaut()
    demo(image)
