import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import numpy as np
    import cv2

    from maskseg import (
        Method,
        ThresholdParams,
        AdaptiveParams,
        RegionGrowingParams,
        WatershedParams,
        create_segmenter,
        draw_segmentation,
        get_contours,
        otsu_level,
        watershed_labels,
    )
    from maskseg.viz import plot_image_grid, plot_segmentation_results
    return (
        AdaptiveParams,
        Method,
        RegionGrowingParams,
        ThresholdParams,
        WatershedParams,
        create_segmenter,
        cv2,
        draw_segmentation,
        get_contours,
        mo,
        np,
        otsu_level,
        plot_image_grid,
        plot_segmentation_results,
        watershed_labels,
    )


@app.cell
def _(mo):
    mo.md("""
    # Binary Mask Segmentation

    This notebook runs every segmentation method of `maskseg` on one synthetic
    grayscale image: two overlapping bright disks and a faint square on a dark,
    slightly noisy background with an intensity ramp.

    The ramp defeats a single global threshold on the right-hand side, the
    overlapping disks show how watershed separates touching objects from the
    background, and the noise exercises the morphological cleanup.
    """)
    return


@app.cell
def _(cv2, np):
    rng = np.random.default_rng(7)
    h, w = 160, 240

    ramp = np.tile(np.linspace(20, 90, w), (h, 1))
    canvas = ramp.copy()
    cv2.circle(canvas, (70, 80), 38, 200, -1)
    cv2.circle(canvas, (120, 80), 30, 185, -1)
    cv2.rectangle(canvas, (170, 40), (220, 120), 130, -1)
    canvas += rng.normal(0, 6, size=(h, w))
    image = np.clip(canvas, 0, 255).astype(np.uint8)
    return (image,)


@app.cell
def _(image, otsu_level, plot_image_grid):
    level = otsu_level(image)
    fig_input = plot_image_grid(
        [image, (image >= level).astype("uint8") * 255],
        ["Input", f"Otsu split at {level}"],
        figsize=(12, 4)
    )
    fig_input
    return (level,)


@app.cell
def _(mo):
    mo.md("""
    ## All methods

    Each segmenter returns a `SegmentationResult` whose mask has already been
    cleaned by an opening followed by a closing with a 3x3 elliptical element.

    - **Threshold**: fixed level 128
    - **Otsu**: level chosen from the histogram
    - **Adaptive mean / Gaussian**: level taken from a 31x31 neighbourhood
    - **Region growing**: one seed per object, local tolerance 12
    - **Watershed (auto)**: markers from Otsu + distance transform
    - **Watershed (manual)**: markers painted around clicked seeds
    """)
    return


@app.cell
def _(
    AdaptiveParams,
    Method,
    RegionGrowingParams,
    ThresholdParams,
    WatershedParams,
    create_segmenter,
    image,
):
    settings = {
        "Threshold 128": (Method.THRESHOLD, ThresholdParams(threshold=128)),
        "Otsu": (Method.OTSU, None),
        "Adaptive mean": (Method.ADAPTIVE_MEAN, AdaptiveParams(block_size=31, c=-10)),
        "Adaptive Gaussian": (Method.ADAPTIVE_GAUSSIAN, AdaptiveParams(block_size=31, c=-10)),
        "Region growing": (
            Method.REGION_GROWING,
            RegionGrowingParams(seeds=[(70, 80), (195, 80)], tolerance=12, connectivity=8),
        ),
        "Watershed (auto)": (Method.WATERSHED, WatershedParams()),
        "Watershed (manual)": (
            Method.WATERSHED,
            WatershedParams(
                use_distance_transform=False,
                foreground_seeds=[(70, 80), (120, 80), (195, 80)],
                background_seeds=[(10, 10), (230, 150), (150, 20), (150, 150)],
            ),
        ),
    }

    results = {
        label: create_segmenter(method, params).segment(image)
        for label, (method, params) in settings.items()
    }
    for label, result in results.items():
        print(f"{label:20s} {result}")
    return (results,)


@app.cell
def _(image, plot_segmentation_results, results):
    fig_results = plot_segmentation_results(image, results, alpha=0.4)
    fig_results
    return


@app.cell
def _(mo):
    mo.md("""
    ## Watershed label map

    The LabelMap behind the automatic watershed: background class (1),
    foreground class (2) and the ridge pixels (-1) where the two floods met.
    """)
    return


@app.cell
def _(WatershedParams, image, np, plot_image_grid, watershed_labels):
    labels = watershed_labels(image, WatershedParams())
    label_view = np.zeros(labels.shape, dtype=np.uint8)
    label_view[labels == 1] = 60
    label_view[labels == 2] = 180
    label_view[labels == -1] = 255
    fig_labels = plot_image_grid([label_view], ["bg=60, fg=180, ridge=255"], figsize=(6, 4))
    fig_labels
    return


@app.cell
def _(draw_segmentation, get_contours, image, plot_image_grid, results):
    mask = results["Watershed (manual)"].mask
    contours = get_contours(mask)
    for contour in contours:
        print(contour)
    fig_overlay = plot_image_grid(
        [draw_segmentation(image, mask, alpha=a) for a in (0.0, 0.5, 1.0)],
        ["alpha=0", "alpha=0.5", "alpha=1"],
        figsize=(15, 4)
    )
    fig_overlay
    return


if __name__ == "__main__":
    app.run()
