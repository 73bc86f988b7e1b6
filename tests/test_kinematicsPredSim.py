import numpy as np
import pandas as pd
import pytest

from boundsPredSim import getBounds
from errorsPredSim import (ConfigurationMismatch, InvalidSettings,
                           PreconditionViolation)
from kinematicsPredSim import checkKinematics, getIK, getIKFromSettings
from settingsPredSim import get_setup
from utils import get_storage_metadata, numpy_to_storage, storage_to_dataframe


def _write_motion(path, Qs, inDegrees=True):
    labels = list(Qs.columns)
    data = Qs.to_numpy().copy()
    if inDegrees:
        for count, label in enumerate(labels):
            if label not in ['time', 'pelvis_tx', 'pelvis_ty', 'pelvis_tz']:
                data[:, count] = data[:, count] * 180 / np.pi
    numpy_to_storage(labels, data, str(path), datatype='IK',
                     inDegrees=inDegrees)
    return str(path)


def test_storage_round_trip(tmp_path, model, make_kinematics):
    Qs = make_kinematics(model.joints, n=21)
    pathMotion = _write_motion(tmp_path / 'motion.mot', Qs, inDegrees=False)
    assert get_storage_metadata(pathMotion)['inDegrees'] == 'no'
    data = storage_to_dataframe(pathMotion, ['knee_angle_r'])
    assert list(data.columns) == ['time', 'knee_angle_r']
    np.testing.assert_allclose(data['knee_angle_r'], Qs['knee_angle_r'],
                               atol=1e-7)


def test_getIK_converts_degrees(tmp_path, model, make_kinematics):
    Qs = make_kinematics(model.joints, n=21)
    pathMotion = _write_motion(tmp_path / 'motion.mot', Qs)
    assert get_storage_metadata(pathMotion)['inDegrees'] == 'yes'

    loaded = getIK(pathMotion, model.joints)
    assert list(loaded.columns) == ['time'] + model.joints
    np.testing.assert_allclose(loaded['hip_flexion_r'], Qs['hip_flexion_r'],
                               atol=1e-6)
    # Translations are never converted.
    np.testing.assert_allclose(loaded['pelvis_ty'], Qs['pelvis_ty'],
                               atol=1e-7)

    inDegrees = getIK(pathMotion, ['knee_angle_r'], degrees=True)
    np.testing.assert_allclose(inDegrees['knee_angle_r'],
                               Qs['knee_angle_r'] * 180 / np.pi, atol=1e-6)


def test_getIK_missing_coordinate(tmp_path, model, make_kinematics):
    Qs = make_kinematics(model.joints, n=21)
    pathMotion = _write_motion(tmp_path / 'motion.mot',
                               Qs.drop(columns=['mtp_angle_r']))
    with pytest.raises(ConfigurationMismatch):
        getIK(pathMotion, model.joints)


def test_getIK_filtering(tmp_path, model, make_kinematics):
    Qs = make_kinematics(model.joints, n=101)
    noise = np.random.default_rng(0).normal(0, 0.01, Qs.shape[0])
    Qs['knee_angle_r'] = Qs['knee_angle_r'] + noise
    pathMotion = _write_motion(tmp_path / 'motion.mot', Qs)

    raw = getIK(pathMotion, model.joints)
    filtered = getIK(pathMotion, model.joints, filter_frequency=6)
    assert filtered.shape == raw.shape
    np.testing.assert_array_equal(filtered['time'], raw['time'])
    assert (np.std(np.diff(filtered['knee_angle_r'])) <
            np.std(np.diff(raw['knee_angle_r'])))


def test_getIK_too_few_samples_for_filtering(tmp_path, model,
                                             make_kinematics):
    Qs = make_kinematics(model.joints, n=6)
    pathMotion = _write_motion(tmp_path / 'motion.mot', Qs)
    getIK(pathMotion, model.joints)
    with pytest.raises(PreconditionViolation):
        getIK(pathMotion, model.joints, filter_frequency=6)


def test_checkKinematics():
    Qs = pd.DataFrame({'time': [0, 0.1, 0.2, 0.3],
                       'a': [0., 1., 2., 3.]})
    checkKinematics(Qs, ['a'])
    with pytest.raises(PreconditionViolation):
        checkKinematics(Qs.drop(columns=['time']), ['a'])
    with pytest.raises(PreconditionViolation):
        checkKinematics(Qs.iloc[::-1], ['a'])
    Qs.loc[2, 'a'] = np.inf
    with pytest.raises(PreconditionViolation):
        checkKinematics(Qs, ['a'])


def test_getIKFromSettings(tmp_path, model, make_kinematics):
    Qs = make_kinematics(model.joints, n=51)
    _write_motion(tmp_path / 'walking.mot', Qs)
    settings = get_setup(
        subject={'folder_name': str(tmp_path), 'IKfile_bounds': 'walking.mot',
                 'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2})
    loaded = getIKFromSettings(settings, model)
    np.testing.assert_allclose(loaded['knee_angle_l'], Qs['knee_angle_l'],
                               atol=1e-6)

    # Bounds are loaded from the settings when no kinematics are given.
    bounds, _ = getBounds(settings, model)
    bounds_direct, _ = getBounds(settings, model, Qs=loaded)
    pd.testing.assert_frame_equal(bounds['Qs'], bounds_direct['Qs'])


def test_getIKFromSettings_without_file(model):
    settings = get_setup(subject={'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2})
    with pytest.raises(InvalidSettings):
        getIKFromSettings(settings, model)
