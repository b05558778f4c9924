# aerodrome-lite/aerodrome/atc/themes.py

# Colour scheme of the viewer, RGB(A) 0-255

class ColorScheme:
    background = [29, 69, 76]
    runway = [90, 90, 90]
    runway_centerline = [230, 230, 230]
    airport_zone = [255, 80, 80, 50]
    approach_zone = [74, 222, 128, 60]
    approach_lights = [74, 222, 128]
    crashed = [239, 68, 68]
    approaching = [74, 222, 128]
    label = (157, 224, 173, 255)
    risk_high = [239, 68, 68, 200]
    risk_medium = [251, 191, 36, 200]


def hex_to_rgb(color):
    """'#60a5fa' -> [96, 165, 250]"""
    color = color.lstrip('#')
    return [int(color[i:i + 2], 16) for i in (0, 2, 4)]
