from PyQt5.QtCore import QSettings

from HKView.common.geom import GeometrySettings

import os.path

class ConfigSetting(object):
    def __init__(self, attr_name, setting_pathname, def_value):
        self.attr_name = attr_name
        self.setting_pathname = setting_pathname
        self.def_value = def_value
    def init(self, target):
        setattr(target, self.attr_name, self.def_value)
    def load(self, settings, target):
        if settings.contains(self.setting_pathname):
            setattr(target, self.attr_name, self.from_setting(settings.value(self.setting_pathname)))
    def save(self, settings, source):
        settings.setValue(self.setting_pathname, self.to_setting(getattr(source, self.attr_name)))
    def from_setting(self, cfgvalue):
        return str(cfgvalue)
    def to_setting(self, value):
        return str(value)

class IntConfigSetting(ConfigSetting):
    def from_setting(self, cfgvalue):
        return int(cfgvalue)

class FloatConfigSetting(ConfigSetting):
    def __init__(self, attr_name, setting_pathname, def_value, digits):
        ConfigSetting.__init__(self, attr_name, setting_pathname, def_value)
        self.digits = digits
    def from_setting(self, cfgvalue):
        return float(cfgvalue)
    def to_setting(self, value):
        return f"{value:0.{self.digits}f}"

class ConfigSettings(object):
    setting_list = [
        FloatConfigSetting('step_size', 'simulation/step_size', GeometrySettings.STEP_SIZE, 2),
        IntConfigSetting('speed_ms', 'simulation/speed_ms', 200),
        ConfigSetting('input_directory', 'paths/input', ''),
        ConfigSetting('last_input_directory', 'paths/last_input', ''),
    ]
    def __init__(self):
        self.settings = self.createSettingsObj()
        for i in self.setting_list:
            i.init(self)
        self.load()
    def createSettingsObj(self):
        return QSettings("HKView", "HKView")
    def load(self):
        settings = self.settings
        settings.sync()
        for i in self.setting_list:
            i.load(settings, self)
    def save(self):
        settings = self.settings
        for i in self.setting_list:
            i.save(settings, self)
        settings.sync()
    def update(self):
        self.step_size = GeometrySettings.clamp_step_size(self.step_size)
        GeometrySettings.STEP_SIZE = self.step_size
    def remember_input(self, filename):
        self.last_input_directory = os.path.dirname(os.path.abspath(filename))
    def input_dir(self):
        return self.input_directory or self.last_input_directory
