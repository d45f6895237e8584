from __future__ import annotations

"""Parameter enhancement stage.

Derives electromagnetic quantities from the smoothed reading.

Complex plane
-------------
  phi  = phase * pi / 180
  Re   = A cos(phi)
  Im   = A sin(phi)
  |Z|  = sqrt(Re**2 + Im**2)

Conductivity (skin-effect estimate)
-----------------------------------
  attenuation = S / A
  delta_est   = 1 / attenuation
  sigma       = 2 / (omega * mu_0 * delta_est**2),   omega = 2 pi f

Permeability and skin depth
---------------------------
  mu    = mu_0 * (1 + |cos(phi)|)
  delta = sqrt(2 / (omega * mu * sigma))

Depth estimate (empirical exponential attenuation)
--------------------------------------------------
  depth = -ln(S / S_ref) / k     for 0 < S < S_ref, else 0

with S_ref = 1000 and k = 0.1 by default.

Only Re, Im, |Z| and depth are written to the reading.  Conductivity,
permeability, skin depth and impedance are returned as diagnostics.
"""

from dataclasses import replace
import math
from typing import Tuple

import numpy as np

from emi_reading_processor.models.reading import Reading
from emi_reading_processor.models.results import EnhancedParameters

MU_0 = 4.0 * math.pi * 1e-7  # H/m


def complex_components(amplitude: float, phase_deg: float) -> Tuple[float, float, float]:
    """Return ``(real, imag, magnitude)`` of ``amplitude * exp(i * phase)``."""
    z = float(amplitude) * np.exp(1j * np.deg2rad(float(phase_deg)))
    real = float(z.real)
    imag = float(z.imag)
    return real, imag, float(math.sqrt(real * real + imag * imag))


def conductivity(signal_strength: float, amplitude: float, frequency: float) -> float:
    """Skin-effect conductivity estimate.

    Precondition: ``amplitude != 0``.  A zero signal yields an infinite skin
    estimate and therefore a conductivity of 0; this is returned as is.
    """
    omega = 2.0 * np.pi * np.float64(frequency)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        attenuation = np.float64(signal_strength) / np.float64(amplitude)
        skin_estimate = np.float64(1.0) / attenuation
        sigma = 2.0 / (omega * MU_0 * skin_estimate * skin_estimate)
    return float(sigma)


def magnetic_permeability(phase_deg: float) -> float:
    return MU_0 * (1.0 + abs(math.cos(math.radians(float(phase_deg)))))


def skin_depth(frequency: float, permeability: float, sigma: float) -> float:
    omega = 2.0 * np.pi * np.float64(frequency)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        value = np.sqrt(2.0 / (omega * np.float64(permeability) * np.float64(sigma)))
    return float(value)


def impedance(real: float, imag: float, magnitude: float) -> Tuple[float, float]:
    """Unit impedance direction; ``(0.0, 0.0)`` for a zero magnitude."""
    if magnitude == 0.0:
        return 0.0, 0.0
    return real / magnitude, imag / magnitude


def depth_estimate(
    signal_strength: float,
    *,
    reference_signal: float = 1000.0,
    attenuation_coefficient: float = 0.1,
) -> float:
    """Empirical depth from signal attenuation.

    Only defined for ``0 < signal_strength < reference_signal``; everything
    else maps to 0.
    """
    s = float(signal_strength)
    if 0.0 < s < float(reference_signal):
        return -math.log(s / float(reference_signal)) / float(attenuation_coefficient)
    return 0.0


def enhance_parameters(
    reading: Reading,
    *,
    reference_signal: float = 1000.0,
    attenuation_coefficient: float = 0.1,
) -> Tuple[Reading, EnhancedParameters]:
    """Compute the derived parameters of ``reading``.

    Returns
    -------
    reading, parameters
        ``reading`` carries ``real_part``, ``imaginary_part``, ``magnitude``
        and ``depth``.  ``parameters`` holds every intermediate.
    """
    real, imag, mag = complex_components(reading.amplitude, reading.phase)

    sigma = conductivity(reading.signal_strength, reading.amplitude, reading.frequency)
    mu = magnetic_permeability(reading.phase)
    delta = skin_depth(reading.frequency, mu, sigma)
    z_re, z_im = impedance(real, imag, mag)

    depth = depth_estimate(
        reading.signal_strength,
        reference_signal=reference_signal,
        attenuation_coefficient=attenuation_coefficient,
    )

    params = EnhancedParameters(
        phase_rad=math.radians(reading.phase),
        real_part=real,
        imaginary_part=imag,
        magnitude=mag,
        conductivity=sigma,
        permeability=mu,
        skin_depth=delta,
        impedance_real=z_re,
        impedance_imaginary=z_im,
        depth=depth,
    )

    out = replace(
        reading,
        real_part=real,
        imaginary_part=imag,
        magnitude=mag,
        depth=depth,
    )
    return out, params
