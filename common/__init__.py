"""跨层公共组件"""
