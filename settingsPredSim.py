'''
    ---------------------------------------------------------------------------
    OpenCap processing: settingsPredSim.py
    ---------------------------------------------------------------------------
    Copyright 2022 Stanford University and the Authors

    Author(s): Antoine Falisse, Scott Uhlrich

    Licensed under the Apache License, Version 2.0 (the "License"); you may not
    use this file except in compliance with the License. You may obtain a copy
    of the License at http://www.apache.org/licenses/LICENSE-2.0
    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Settings used to derive the bounds and scaling factors of the predictive
    simulations. The subject entries have no sensible default and must be
    provided, either directly or through a yaml file.
'''

import copy
import numbers

from errorsPredSim import InvalidSettings
from utils import import_metadata

def get_default_settings():

    settings = {}
    settings['subject'] = {
        # Folder and name of the motion file informing the bounds.
        'folder_name': None,
        'IKfile_bounds': None,
        # Initial guess of the pelvis height (m).
        'IG_PelvisY': None,
        # Target forward velocity of the pelvis (m/s).
        'vPelvis_x_trgt': None,
        # 'active' for torque-actuated mtp joints, 'passive' otherwise.
        'mtp_type': 'passive'}
    settings['bounds'] = {
        # Cutoff frequency (Hz) of the low-pass filter applied to the
        # reference kinematics, None to skip filtering.
        'filter_frequency': None,
        # Lumbar torque actuators, for models without lumbar muscles.
        'withLumbarCoordinateActuators': True,
        # Raise instead of falling back to unit scaling for bounds at zero.
        'strict_scaling': False,
        'lb_activation': 0.05,
        'activationTimeConstant': 0.015,
        'deactivationTimeConstant': 0.06}

    return settings

# %% Merge user settings over defaults.
def get_setup(subject=None, bounds=None):

    if subject is None:
        subject = {}
    if bounds is None:
        bounds = {}
    settings = get_default_settings()
    for key in subject:
        if key not in settings['subject']:
            raise InvalidSettings('Unknown subject setting: {}'.format(key))
        settings['subject'][key] = subject[key]
    for key in bounds:
        if key not in settings['bounds']:
            raise InvalidSettings('Unknown bounds setting: {}'.format(key))
        settings['bounds'][key] = bounds[key]
    validate_settings(settings)

    return settings

# %% Load settings from yaml file.
def load_settings(pathSettings):

    parsed = import_metadata(pathSettings)
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise InvalidSettings(
            'Expected a mapping in {}.'.format(pathSettings))
    for key in parsed:
        if key not in ['subject', 'bounds']:
            raise InvalidSettings('Unknown settings section: {}'.format(key))

    return get_setup(subject=copy.deepcopy(parsed.get('subject') or {}),
                     bounds=copy.deepcopy(parsed.get('bounds') or {}))

def _is_number(value):

    return (isinstance(value, numbers.Real) and
            not isinstance(value, bool))

def validate_settings(settings):

    subject = settings['subject']
    for key in ['IG_PelvisY', 'vPelvis_x_trgt']:
        if not _is_number(subject[key]):
            raise InvalidSettings(
                'subject.{} should be a number, got {!r}.'.format(
                    key, subject[key]))
    if not isinstance(subject['mtp_type'], str):
        raise InvalidSettings('subject.mtp_type should be a string.')

    bounds = settings['bounds']
    filter_frequency = bounds['filter_frequency']
    if filter_frequency is not None and (
            not _is_number(filter_frequency) or filter_frequency <= 0):
        raise InvalidSettings(
            'bounds.filter_frequency should be None or a positive number.')
    for key in ['withLumbarCoordinateActuators', 'strict_scaling']:
        if not isinstance(bounds[key], bool):
            raise InvalidSettings('bounds.{} should be a boolean.'.format(key))
    for key in ['activationTimeConstant', 'deactivationTimeConstant']:
        if not _is_number(bounds[key]) or bounds[key] <= 0:
            raise InvalidSettings(
                'bounds.{} should be a positive number.'.format(key))
    if not _is_number(bounds['lb_activation']) or not (
            0 <= bounds['lb_activation'] < 1):
        raise InvalidSettings('bounds.lb_activation should be in [0, 1).')
