"""University Attendance System API"""
