"""Standard converters between Modbus registers and MQTT values, and the plugin that provides them."""