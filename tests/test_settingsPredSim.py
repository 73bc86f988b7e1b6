import pytest

from errorsPredSim import InvalidSettings
from settingsPredSim import get_default_settings, get_setup, load_settings


def test_defaults():
    settings = get_default_settings()
    assert settings['subject']['mtp_type'] == 'passive'
    assert settings['bounds']['lb_activation'] == 0.05
    assert settings['bounds']['activationTimeConstant'] == 0.015
    assert settings['bounds']['deactivationTimeConstant'] == 0.06
    assert settings['bounds']['filter_frequency'] is None
    assert settings['bounds']['withLumbarCoordinateActuators'] is True
    assert settings['bounds']['strict_scaling'] is False


def test_get_setup_merges_over_defaults():
    settings = get_setup(subject={'IG_PelvisY': 0.95, 'vPelvis_x_trgt': 2},
                         bounds={'filter_frequency': 6})
    assert settings['subject']['IG_PelvisY'] == 0.95
    assert settings['subject']['vPelvis_x_trgt'] == 2
    assert settings['bounds']['filter_frequency'] == 6
    assert settings['bounds']['lb_activation'] == 0.05
    # Defaults are not shared between calls.
    assert get_default_settings()['bounds']['filter_frequency'] is None


def test_get_setup_without_overrides():
    subject = {'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2}
    settings = get_setup(subject=subject)
    assert settings['bounds'] == get_default_settings()['bounds']
    settings['subject']['IG_PelvisY'] = 1.1
    assert subject == {'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2}
    # Speed and pelvis height have no defaults.
    with pytest.raises(InvalidSettings):
        get_setup()


@pytest.mark.parametrize('subject, bounds', [
    ({'IG_PelvisY': 0.9}, {}),
    ({'IG_PelvisY': '0.9', 'vPelvis_x_trgt': 1.2}, {}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': True}, {}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2, 'mtp_type': None}, {}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2}, {'filter_frequency': 0}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2}, {'strict_scaling': 1}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2},
     {'activationTimeConstant': 0}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2}, {'lb_activation': 1}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2, 'speed': 1}, {}),
    ({'IG_PelvisY': 0.9, 'vPelvis_x_trgt': 1.2}, {'cutoff': 6}),
])
def test_invalid_settings(subject, bounds):
    with pytest.raises(InvalidSettings):
        get_setup(subject=subject, bounds=bounds)


def test_load_settings(tmp_path):
    pathSettings = tmp_path / 'settings.yaml'
    pathSettings.write_text(
        'subject:\n'
        '  folder_name: /data/subject1\n'
        '  IKfile_bounds: walking.mot\n'
        '  IG_PelvisY: 0.93\n'
        '  vPelvis_x_trgt: 1.5\n'
        '  mtp_type: active\n'
        'bounds:\n'
        '  filter_frequency: 6\n'
        '  strict_scaling: true\n')
    settings = load_settings(str(pathSettings))
    assert settings['subject']['IKfile_bounds'] == 'walking.mot'
    assert settings['subject']['IG_PelvisY'] == 0.93
    assert settings['subject']['mtp_type'] == 'active'
    assert settings['bounds']['filter_frequency'] == 6
    assert settings['bounds']['strict_scaling'] is True
    assert settings['bounds']['lb_activation'] == 0.05


def test_load_settings_unknown_section(tmp_path):
    pathSettings = tmp_path / 'settings.yaml'
    pathSettings.write_text('solver:\n  tol: 4\n')
    with pytest.raises(InvalidSettings):
        load_settings(str(pathSettings))


def test_load_settings_not_a_mapping(tmp_path):
    pathSettings = tmp_path / 'settings.yaml'
    pathSettings.write_text('- 1\n- 2\n')
    with pytest.raises(InvalidSettings):
        load_settings(str(pathSettings))
